from kvasir.cli import app

app(prog_name="kvasir")
