from ragadmin.cli.main import app

app(prog_name="ragadmin")
