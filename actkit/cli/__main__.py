"""Entry point for the actkit CLI when run as python -m actkit.cli."""

if __name__ == "__main__":
    from actkit.cli.main import main

    main()
