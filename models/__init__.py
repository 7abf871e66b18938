from models.db_storage import DBStorage

storage = DBStorage()
