"""Allow running the service with `python -m iotexec`."""

from iotexec.main import run

if __name__ == "__main__":
    run()
