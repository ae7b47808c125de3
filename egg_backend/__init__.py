# MySQL driver: use PyMySQL as MySQLdb unless the native mysqlclient is present.
try:
    import MySQLdb  # type: ignore  # noqa: F401
except ImportError:
    import pymysql

    pymysql.install_as_MySQLdb()
