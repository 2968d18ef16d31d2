# ecr_secret_operator/__main__.py

from .cli import cli

if __name__ == "__main__":
    cli()
