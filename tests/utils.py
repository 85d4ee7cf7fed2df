import redis
import time


def is_redis_running(**kwargs):
    try:
        r = redis.Redis(**kwargs)
        r.ping()
        return True
    except redis.exceptions.ConnectionError:
        return False
    except Exception:
        raise


class ExitAfter:
    def __init__(self, log_count):
        self.loops = iter(range(log_count))

    def __call__(self, *args, **kwargs):
        step = next(self.loops, None)
        return step is not None


def wait_until(condition, timeout=1.0):
    deadline = time.time() + timeout
    while not condition():
        if time.time() > deadline:
            return False
        time.sleep(0.01)
    return True
