"""Allow running as python -m availmap."""

from availmap.availmap import main

if __name__ == '__main__':
    main()
