from homestay.domain.navigation import Navigator


class ConsoleNavigator(Navigator):
    """Adapter: print navigations instead of switching screens. For dev/testing."""

    def __init__(self, echo: bool = True):
        self.echo = echo
        self.visited: list[str] = []

    def push(self, path: str) -> None:
        self.visited.append(path)
        if self.echo:
            print(f"→ navigate {path}")
