"""
main.py - tpi 진입점

    $ python main.py plan plan.json
    $ tpi plan plan.json        # pip install 후 console_script
"""

from cli.app import cli


def main():
    """tpi CLI 실행 (cli.app:cli 위임)"""
    cli(prog_name="tpi")


if __name__ == "__main__":
    main()
