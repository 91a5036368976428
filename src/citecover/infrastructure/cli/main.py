import typer

from .commands import (
    cite as cite_cmd,
    compose as compose_cmd,
    inspect as inspect_cmd,
    validate as validate_cmd,
)

app = typer.Typer(help="citecover CLI")

app.add_typer(compose_cmd.app, name="compose")
app.add_typer(cite_cmd.app, name="cite")
app.add_typer(inspect_cmd.app, name="inspect")
app.add_typer(validate_cmd.app, name="validate")


if __name__ == "__main__":
    app()
