"""Entry point for ``python -m kubeforge``."""

from kubeforge.cli.main import main


if __name__ == "__main__":
    main()
