import logging as lg


class RunSettings:
    ''' Options shared by every CLI command, kept as the click context object '''

    verbose: bool
    trace: bool             # Dump machine state before every instruction
    max_steps: int | None   # None runs until Exit

    def __init__(self):
        self.verbose = False
        self.trace = False
        self.max_steps = None

    def update(self, **options):
        for name, value in options.items():
            if not hasattr(self, name):
                raise TypeError(f'Unknown run setting {name}')

            if value is not None:
                setattr(self, name, value)

        return self

    def log_level(self) -> int:
        # Tracing is emitted at debug level, so it implies verbose output
        return lg.DEBUG if self.verbose or self.trace else lg.INFO
