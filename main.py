'''
FastAPI application for the Hotel Inventory service.

The app exposes endpoints to manage hotels and the room inventories
nested under them.

Available endpoints:
- /hotels: Create, read, update, delete hotels (reads include their rooms).
- /rooms: Create, read, update, delete room entries (reads include their hotel).

Each endpoint supports standard HTTP methods (GET, POST, PUT, DELETE)
to perform CRUD operations on the respective resources.
'''

import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from Database.db import InventoryDB

from api.utils import request_validation_handler

# routers
from api.hotel_routes import hotel_router
from api.room_routes import room_router

load_dotenv()
logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # --- Startup ---
    app.state.db = InventoryDB().client   # create ONCE
    yield

# Initialize FastAPI app
app = FastAPI(title="Hotel Inventory API", version="1.0.0", lifespan=lifespan)
app.add_exception_handler(RequestValidationError, request_validation_handler)

app.include_router(hotel_router, prefix="/hotels", tags=["Hotels"])
app.include_router(room_router, prefix="/rooms", tags=["Rooms"])

@app.get("/")
async def root():
    return {"message": "Welcome to the Hotel Inventory API"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="localhost", port=8000, reload=True)
