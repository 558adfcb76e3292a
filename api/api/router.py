from fastapi import APIRouter
from api.api.routes import documents, study_materials, pyq, chat

api_router = APIRouter()

# Include all route modules
api_router.include_router(documents.router, prefix="/documents", tags=["documents"])
api_router.include_router(study_materials.router, prefix="/study-materials", tags=["study-materials"])
api_router.include_router(pyq.router, prefix="/pyq", tags=["pyq"])
api_router.include_router(chat.router, prefix="/chat", tags=["chat"])
