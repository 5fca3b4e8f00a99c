"""
Initial setup of the service: creates the database tables and, if an initial
administrator is configured, the admin group and that user.
"""

from sqlalchemy import select

from groupdir.config.settings import Settings


def initial_setup(settings: Settings):
    """
    Create the schema, the admin group (whose extension marks its members as
    cluster administrators) and the initial admin user. Existing records are
    left alone, so this can be run repeatedly.
    """
    from groupdir.database.group import Group
    from groupdir.database.meta import ALL_TABLES
    from groupdir.database.user import User

    # Ensure ruff doesn't get rid of import
    ALL_TABLES[1]

    manager = settings.sync_manager()
    manager.create_all()

    if settings.initial_admin is None:
        return

    with manager.session() as conn:
        group = conn.execute(
            select(Group).where(Group.group_name == settings.admin_group_name)
        ).scalar_one_or_none()

        if group is None:
            group = Group(
                group_name=settings.admin_group_name,
                description="Cluster administrators",
                external_name="",
                extension={"acls": {"admin": True}},
            )
            conn.add(group)
            print(f"Created admin group {settings.admin_group_name}")

        user = conn.execute(
            select(User).where(User.user_name == settings.initial_admin)
        ).scalar_one_or_none()

        if user is None:
            user = User(
                user_name=settings.initial_admin,
                group_list=[settings.admin_group_name],
            )
            conn.add(user)
            print(f"Created initial admin {settings.initial_admin}")

        conn.commit()

    return
