"""Storage singleton shared by the models and the API blueprints."""
from models.db_storage import DBStorage

storage = DBStorage()
