"""``python -m lazytree`` behaves exactly like the ``lazytree`` script."""

from .cli import main


if __name__ == "__main__":
    main()
