"""
A simple CLI for running the server.
"""

import os
import sys

import uvicorn

USAGE = "Only supported commands are groupdir run dev, groupdir run prod, or groupdir setup"


def run_server():
    uvicorn.run("groupdir.api.app:app", host="0.0.0.0")


def main():
    try:
        run = sys.argv[1] == "run"
        setup = sys.argv[1] == "setup"
        dev = run and sys.argv[2] == "dev"
        prod = run and sys.argv[2] == "prod"
    except IndexError:
        print(USAGE)
        exit(1)

    if not (dev or prod or setup):
        print(USAGE)
        exit(1)

    if dev:
        from testcontainers.postgres import PostgresContainer

        with PostgresContainer() as container:
            print(
                f"Container details: username={container.username}, password={container.password}, port={container.get_exposed_port(container.port)}"
            )

            environment = {
                "GROUPDIR_DATABASE_TYPE": "postgres",
                "GROUPDIR_DATABASE_USER": container.username,
                "GROUPDIR_DATABASE_PASSWORD": container.password,
                "GROUPDIR_DATABASE_PORT": str(container.get_exposed_port(container.port)),
                "GROUPDIR_DATABASE_HOST": "localhost",
                "GROUPDIR_DATABASE_DB": container.dbname,
                "GROUPDIR_DATABASE_ECHO": "False",
                "GROUPDIR_INITIAL_ADMIN": os.environ.get("GROUPDIR_INITIAL_ADMIN", "admin"),
            }

            os.environ.update(environment)

            from groupdir.api.setup import initial_setup
            from groupdir.config.settings import Settings

            initial_setup(settings=Settings())
            run_server()

    if prod:
        from groupdir.api.setup import initial_setup
        from groupdir.config.settings import Settings

        initial_setup(settings=Settings())
        run_server()

    if setup:
        from groupdir.api.setup import initial_setup
        from groupdir.config.settings import Settings

        initial_setup(settings=Settings())

        print("Setup complete, please restart the container or application")
        exit(0)
