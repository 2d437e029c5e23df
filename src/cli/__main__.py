"""`python -m cli.__main__` / `python main.py` from a source checkout."""

from cli.main import run

if __name__ == "__main__":
    run()
