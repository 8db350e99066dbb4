# wikimedia/cli/__main__.py
from wikimedia.cli import app

app(prog_name="wikimedia")
