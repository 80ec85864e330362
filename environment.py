from errors import SpellNameError


class Environment:
    """One scope in the chain from the current block out to the global scope."""

    def __init__(self, parent=None):
        self.parent = parent
        self.values = {}

    def define(self, name: str, value):
        """Binds name in this scope, shadowing any outer binding."""
        self.values[name] = value

    def assign(self, name: str, value):
        """Rebinds name in the nearest scope that already defines it."""
        env = self.resolve(name)
        if env is None:
            raise SpellNameError(f"Undefined variable '{name}'")
        env.values[name] = value

    def get(self, name: str):
        env = self.resolve(name)
        if env is None:
            raise SpellNameError(f"Undefined variable '{name}'")
        return env.values[name]

    def resolve(self, name: str):
        env = self
        while env is not None:
            if name in env.values:
                return env
            env = env.parent
        return None

    def create_child(self):
        return Environment(self)
