import os
from decimal import Decimal


class Config:
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite://")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    TESTING = False

    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    PORT = int(os.getenv("PORT", "5000"))

    # flat 8% surcharge applied at checkout
    TAX_RATE = Decimal("0.08")

    @staticmethod
    def init_app(app):
        pass


class DevelopmentConfig(Config):
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    LOG_LEVEL = "WARNING"


config_by_name = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "default": Config,
}


def get_config(name=None):
    name = name or os.getenv("SHOPCART_ENV", "default")
    try:
        return config_by_name[name]
    except KeyError:
        raise ValueError(f"unknown config '{name}', expected one of: {', '.join(config_by_name)}")
