import threading


class Debouncer:
    """Runs only the last of a burst of calls, once ``delay`` seconds pass quietly.

    Scheduling replaces any call that has not fired yet. A call that already
    started is left alone.
    """

    def __init__(self, delay=0.3):
        self.delay = delay
        self._lock = threading.Lock()
        self._timer = None
        self._pending = None
        self._generation = 0

    def call(self, fn, *args, **kwargs):
        with self._lock:
            if self._timer:
                self._timer.cancel()
            self._generation += 1
            self._pending = (fn, args, kwargs)
            self._timer = threading.Timer(self.delay, self._fire, args=(self._generation,))
            self._timer.daemon = True
            self._timer.start()

    def cancel(self):
        with self._lock:
            if self._timer:
                self._timer.cancel()
            self._generation += 1
            self._timer = None
            self._pending = None

    def flush(self):
        """Run the pending call right away, if any."""
        with self._lock:
            generation = self._generation
        self._fire(generation)

    @property
    def pending(self):
        return self._pending is not None

    def _fire(self, generation):
        with self._lock:
            # a timer that lost the race against call() or cancel()
            if generation != self._generation:
                return
            if self._timer:
                self._timer.cancel()
            pending, self._pending = self._pending, None
            self._timer = None
        if pending:
            fn, args, kwargs = pending
            fn(*args, **kwargs)
