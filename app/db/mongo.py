# app/db/mongo.py
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING
from app.core.config import settings
from app.core.logger import logger


client = AsyncIOMotorClient(
    settings.MONGODB_URI,
    username=settings.MONGODB_USERNAME,
    password=settings.MONGODB_PASSWORD,
)
db = client[settings.MONGODB_DB]

# Collections
chat_histories_collection = db.get_collection(settings.CHAT_HISTORY_COLLECTION)
patients_collection = db.get_collection(settings.PATIENTS_COLLECTION)


# Function to check DB connection
async def verify_mongodb_connection():
    try:
        await client.server_info()
        logger.info("MongoDB connection established")
    except Exception as e:
        logger.error(f"MongoDB connection failed: {e}")

async def ensure_indexes():
    # Session reads filter on session_id and sort on _id
    await chat_histories_collection.create_index([("session_id", ASCENDING), ("_id", ASCENDING)])
    await patients_collection.create_index("telefone")
