# bookdigest/__main__.py
from bookdigest.cli.cli import app

if __name__ == "__main__":
    app()
