import environ


class ImproperlyConfigured(Exception):
    pass


class Settings(dict):
    def __getattr__(self, item):
        return self.get(item)

    def __setattr__(self, key, value):
        self[key] = value


def setup_settings(env_file="/etc/radio_player.env"):
    env = environ.Env()
    env.read_env(env_file=env_file)
    try:
        DEBUG = env.bool("DEBUG", default=False)
        return Settings(
            DEBUG=DEBUG,
            BACKEND_CLIENT=env(
                "BACKEND_CLIENT",
                default="radio_player.backends.redis",
            ),
            MEDIA_BACKEND=env(
                "MEDIA_BACKEND",
                default="radio_player.media_backends.vlc",
            ),
            REDIS_HOST=env("REDIS_HOST", default="localhost"),
            REDIS_PORT=env.int("REDIS_PORT", default=6379),
            PLAYER_REDIS_CHANNEL=env(
                "PLAYER_REDIS_CHANNEL", default="PLAYER_REDIS_CHANNEL"
            ),
            REPLY_REDIS_CHANNEL=env(
                "REPLY_REDIS_CHANNEL", default="PLAYER_REPLY_CHANNEL"
            ),
            COMMAND_TIMEOUT=env.float("COMMAND_TIMEOUT", default=5.0),
            TOGGLE_TIMEOUT=env.float("TOGGLE_TIMEOUT", default=0.0),
            BACKEND_WORKERS=env.int("BACKEND_WORKERS", default=4),
            STREAM_URL=env(
                "STREAM_URL", default="https://relay0.r-a-d.io/main.mp3"
            ),
            API_URL=env("API_URL", default="https://r-a-d.io/api"),
            NOW_PLAYING_INTERVAL=env.float("NOW_PLAYING_INTERVAL", default=5.0),
            LOGGING_CONFIG={
                "version": 1,
                "disable_existing_loggers": True,
                "formatters": {
                    "standard": {
                        "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
                    },
                },
                "handlers": {
                    "default": {
                        "level": "DEBUG" if DEBUG else "INFO",
                        "formatter": "standard",
                        "class": "logging.StreamHandler"
                    },
                },
                "loggers": {
                    "": {
                        "handlers": ["default"],
                        "level": "DEBUG" if DEBUG else "INFO",
                    }
                }
            },
        )
    except (KeyError, ValueError) as e:
        raise ImproperlyConfigured("Invalid environment variable: {}".format(e))


settings = setup_settings()
