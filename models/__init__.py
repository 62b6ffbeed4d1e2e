from models.db_storage import DBStorage

# Process-wide storage; the app factory configures it with the database URL.
storage = DBStorage()
