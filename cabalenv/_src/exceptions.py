class CabalEnvError(Exception):
    def __init__(self, msg):
        self.msg = msg
        super().__init__(self.msg)


class InvalidDependency(CabalEnvError):
    def __init__(self, token, reason):
        self.token = token
        super().__init__(f"Invalid dependency `{token}`: {reason}")


class UnrepresentableConstraint(CabalEnvError):
    def __init__(self, name, version_range, reason):
        self.name = name
        self.version_range = version_range
        super().__init__(
            f"Cannot express constraint `{name} {version_range}` in a cabal file"
            f"\nReason: {reason}"
        )


class SolverFailure(CabalEnvError):
    def __init__(self, reason, hint, command, cwd, output=""):
        self.reason = reason
        self.hint = hint
        self.command = command
        self.cwd = cwd
        self.output = output
        super().__init__(
            f"ERROR: {reason}"
            f"\nRan command: `{' '.join(command)}`"
            f"\ncwd: `{cwd}`"
            f"\nHint: {hint}"
            + (f"\nSolver output:\n{output}" if output else "")
        )


class PlanDecodeError(CabalEnvError):
    def __init__(self, path, err):
        self.path = path
        super().__init__(
            f"Failed to read build plan!"
            f"\nPlan file: `{path}`"
            f"\nError message: {err}"
        )


class EnvironmentCorrupt(CabalEnvError):
    def __init__(self, path, reason):
        self.path = path
        super().__init__(
            f"Refusing to overwrite `{path}`: not an environment file written by cabalenv"
            f"\nReason: {reason}"
        )


class UnimplementedAction(CabalEnvError):
    def __init__(self, action):
        self.action = action
        super().__init__(f"{action} not implemented")


class ToolchainError(CabalEnvError):
    def __init__(self, command, err):
        self.command = command
        super().__init__(
            f"Failed to query the compiler!"
            f"\nRan command: `{' '.join(command)}`"
            f"\nError message: {err}"
        )


class InvalidEnvironmentName(CabalEnvError):
    def __init__(self, name, reason):
        self.name = name
        super().__init__(f"Invalid environment name {name!r}: {reason}")
