import threading
from collections import deque


class QueueClosed(Exception):
    """Raised by put() once the queue has been closed."""


class WorkQueue:
    """
    Unbounded FIFO shared by any number of producers and consumers.

    close() is the only end-of-work signal: get() keeps handing out what is
    left and returns None once the queue is closed and empty. cancel()
    closes the queue and drops whatever is still pending.
    """

    def __init__(self):
        self._items = deque()
        self._closed = False
        self._not_empty = threading.Condition(threading.Lock())

    def put(self, item):
        if item is None:
            raise ValueError("WorkQueue items cannot be None")
        with self._not_empty:
            if self._closed:
                raise QueueClosed("put() on a closed WorkQueue")
            self._items.append(item)
            self._not_empty.notify()

    def get(self):
        with self._not_empty:
            while not self._items:
                if self._closed:
                    return None
                self._not_empty.wait()
            return self._items.popleft()

    def close(self):
        with self._not_empty:
            self._closed = True
            self._not_empty.notify_all()

    def cancel(self):
        with self._not_empty:
            dropped = len(self._items)
            self._items.clear()
            self._closed = True
            self._not_empty.notify_all()
            return dropped

    def __iter__(self):
        while True:
            item = self.get()
            if item is None:
                return
            yield item
