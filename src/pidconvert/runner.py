import typer

from pidconvert.pid import runner as pid

app = typer.Typer()
app.add_typer(pid.app, name='pid')

if __name__ == "__main__":
    app()
