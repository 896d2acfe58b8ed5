"""Domain rules and error types shared by services and repositories."""
