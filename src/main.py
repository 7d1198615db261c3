"""Main entry point for the task manager.

One command per process: the store is loaded, the command applied, the
store saved, and the process exits with the command's status.
"""
from cli import cli


def main():
    cli(prog_name="taskmanager")

if __name__ == "__main__":
    main()
