import importlib
import json
import redis
import time


def get_and_decode_redis_message(redis_pipe, logger, timeout=0.0):
    try:
        msg = redis_pipe.get_message(timeout=timeout)
    except redis.exceptions.ConnectionError:
        logger.error("Redis connection closed.")
        return
    if msg and msg["type"] == "message":
        try:
            return json.loads(msg["data"])
        except (TypeError, ValueError) as e:
            logger.error(
                "Received invalid command format that caused "
                "exception {}".format(e)
            )


def get_redis_conn(host="localhost", port=6379, timeout=60 * 60):
    conn = redis.StrictRedis(
        host=host,
        port=port,
        db=0,
        encoding="utf-8",
        decode_responses=True,
    )
    redis_ready = False
    time_expires = time.time() + timeout
    while not redis_ready and time_expires - time.time() > 0:
        try:
            redis_ready = conn.ping()
        except redis.exceptions.ConnectionError:
            time.sleep(1)
    return conn


def load_backend(path, class_name):
    """
    Import class `class_name` from dotted module `path`,
    e.g. load_backend("radio_player.media_backends.vlc", "MediaBackend")
    """
    module = importlib.import_module(path)
    return getattr(module, class_name)
