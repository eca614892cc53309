"""Allow ``python -m vc_changelog``."""

from vc_changelog.cli import main


if __name__ == "__main__":
    main(prog_name="git-changelog")
