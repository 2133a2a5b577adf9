from versionize.cli import app

app()
