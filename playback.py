"""Playback queue navigation and the player that drives a media widget."""
import logging
import random
import threading

logger = logging.getLogger(__name__)

PLAYING = 'playing'
PAUSED = 'paused'
ENDED = 'ended'


class PlaybackQueue:
    """Navigation over an ordered list of records identified by ``id``.

    An item that is not in the list behaves as if it sat just before the
    first element for next() and at the start for previous().
    """

    def __init__(self, items=None, shuffle=False, repeat=False, rng=None):
        self.items = list(items or [])
        self.shuffle = shuffle
        self.repeat = repeat
        self.rng = rng or random.Random()

    def index_of(self, current):
        if current is None:
            return -1
        for index, item in enumerate(self.items):
            if item.id == current.id:
                return index
        return -1

    def previous(self, current):
        if not self.items:
            return None
        index = self.index_of(current)
        if index > 0:
            return self.items[index - 1]
        return self.items[-1]

    def next(self, current):
        if not self.items:
            return None
        if self.shuffle:
            return self.rng.choice(self.items)
        index = self.index_of(current)
        if index < len(self.items) - 1:
            return self.items[index + 1]
        return self.items[0]

    def after_ended(self, current):
        """Item to play when ``current`` finished on its own.

        Same as next() except at the end of the list, where playback only
        wraps around to the first item with repeat on and stops otherwise.
        """
        if not self.items:
            return None
        if self.shuffle:
            return self.rng.choice(self.items)
        index = self.index_of(current)
        if index < len(self.items) - 1:
            return self.items[index + 1]
        if self.repeat:
            return self.items[0]
        return None


class Player:
    """Playback state on top of an embedded media widget.

    The widget needs load(item), play(), pause(), seek(seconds),
    set_volume(volume), mute(), unmute(), get_duration() and
    get_current_time().
    """

    def __init__(self, widget, queue=None, volume=50):
        self.widget = widget
        self.queue = queue or PlaybackQueue()
        self.current = None
        self.is_playing = False
        self.is_muted = False
        self.volume = volume
        self.current_time = 0.0
        self.duration = 0.0

    def select(self, item):
        """Make ``item`` current, rewinding it and keeping playback going."""
        self.current = item
        self.current_time = 0.0
        self.widget.load(item)
        self.widget.seek(0)
        if self.is_playing:
            self.widget.play()
        self.duration = self.widget.get_duration() or 0.0
        logger.debug("Now on %s", item.id)

    def toggle_play(self):
        if self.current is None:
            return self.is_playing
        if self.is_playing:
            self.widget.pause()
        else:
            self.widget.play()
        self.is_playing = not self.is_playing
        return self.is_playing

    def seek(self, seconds):
        seconds = max(0.0, float(seconds))
        if self.duration:
            seconds = min(seconds, self.duration)
        self.widget.seek(seconds)
        self.current_time = seconds

    def set_volume(self, volume):
        self.volume = max(0, min(100, volume))
        self.widget.set_volume(self.volume)
        if self.is_muted:
            self.widget.unmute()
            self.is_muted = False

    def toggle_mute(self):
        if self.is_muted:
            self.widget.unmute()
        else:
            self.widget.mute()
        self.is_muted = not self.is_muted
        return self.is_muted

    def toggle_shuffle(self):
        self.queue.shuffle = not self.queue.shuffle
        return self.queue.shuffle

    def toggle_repeat(self):
        self.queue.repeat = not self.queue.repeat
        return self.queue.repeat

    def next(self):
        item = self.queue.next(self.current)
        if item is not None:
            self.select(item)
        return item

    def previous(self):
        item = self.queue.previous(self.current)
        if item is not None:
            self.select(item)
        return item

    def on_state_change(self, state):
        if state == PLAYING:
            self.is_playing = True
        elif state == PAUSED:
            self.is_playing = False
        elif state == ENDED:
            item = self.queue.after_ended(self.current)
            if item is None:
                self.is_playing = False
            else:
                self.select(item)

    def poll_position(self):
        if self.is_playing and self.current is not None:
            self.current_time = self.widget.get_current_time() or 0.0
        return self.current_time


class PositionPoller:
    """Reads the player's position at a fixed interval on a daemon thread."""

    def __init__(self, player, interval=1.0):
        self.player = player
        self.interval = interval
        self._stop = threading.Event()
        self._thread = None

    def start(self):
        if self._thread and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def _run(self):
        while not self._stop.wait(self.interval):
            try:
                self.player.poll_position()
            except Exception:
                logger.exception("Error reading playback position")

    def stop(self):
        self._stop.set()
        if self._thread:
            self._thread.join()
            self._thread = None
