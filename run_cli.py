import typer

import flowtime.cli.cli

if __name__ == "__main__":
    typer_app: typer.Typer = flowtime.cli.cli.app
    typer_app()
