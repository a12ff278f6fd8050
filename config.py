# config.py


class Config:
    DEBUG = False
    TESTING = False
    SHEETDB_API_URL = "https://sheetdb.io/api/v1/crhv4u171vi50"
    # Empty means the dashboard calls the proxy in-process instead of over HTTP
    VENDOR_API_URL = ""


class ProductionConfig(Config):
    pass


class DevelopmentConfig(Config):
    DEBUG = True


class TestingConfig(Config):
    TESTING = True
    DEBUG = True
    SHEETDB_API_URL = "https://sheetdb.test/api/v1/testing"
