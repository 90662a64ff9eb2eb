import os
import mysql.connector
from mysql.connector import pooling
from dotenv import load_dotenv

load_dotenv()

SUPPORTED_CURRENCIES = ('USD', 'EUR', 'GBP')

class Config:
    SECRET_KEY = os.getenv('SECRET_KEY')
    MYSQL_HOST = os.getenv('MYSQL_HOST')
    MYSQL_USER = os.getenv('MYSQL_USER')
    MYSQL_PASSWORD = os.getenv('MYSQL_PASSWORD')
    MYSQL_DATABASE = os.getenv('MYSQL_DATABASE', 'finance_db')
    MYSQL_POOL_SIZE = int(os.getenv('MYSQL_POOL_SIZE', '5'))
    CURRENCY = os.getenv('CURRENCY', 'USD').upper()
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'

    @staticmethod
    def init_db(app):
        """Build the one connection pool the app uses for its whole lifetime."""
        app.db_pool = mysql.connector.pooling.MySQLConnectionPool(
            pool_name="finance_pool",
            pool_size=app.config.get('MYSQL_POOL_SIZE', 5),
            host=Config.MYSQL_HOST,
            user=Config.MYSQL_USER,
            password=Config.MYSQL_PASSWORD,
            database=Config.MYSQL_DATABASE
        )
