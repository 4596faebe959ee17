"""Main CLI application."""

import typer
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()

from .exceptions import exceptions_app
from .fetch import fetch_command
from .init import init_command
from .run import run_command
from .sentences import sentences_command
from .show import show_command

app = typer.Typer(
    name="vocabtrend",
    help="VocabTrend - Vocabulary trends in scholarly corpora",
    no_args_is_help=True,
)

# Register commands
app.command("init")(init_command)
app.command("run")(run_command)
app.command("sentences")(sentences_command)
app.command("fetch")(fetch_command)
app.command("show")(show_command)
app.add_typer(exceptions_app, name="exceptions", help="Manage the article exception list")


if __name__ == "__main__":
    app()
