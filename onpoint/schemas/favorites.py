from pydantic import BaseModel

class FavoriteStatus(BaseModel):
    tripId: str
    isFavorite: bool
