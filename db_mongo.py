from motor.motor_asyncio import AsyncIOMotorClient
import os
from dotenv import load_dotenv

load_dotenv()

# MongoDB connection string
MONGO_DETAILS = os.getenv("MONGO_URI", "mongodb://localhost:27017")
DATABASE_NAME = os.getenv("MONGO_DATABASE", "unimatch")

# Create async client (connects lazily on first query)
client = AsyncIOMotorClient(MONGO_DETAILS)
db = client[DATABASE_NAME]

# Collections
profiles_collection = db["profiles"]
