"""Pydantic schemas for quotes and stock-price responses."""
from pydantic import BaseModel, Field
from typing import List, Union


# --- Quote Schemas ---
class Quote(BaseModel):
    symbol: str
    price: float = Field(ge=0)
    # True when the price came from the fallback table or random filler
    fallback: bool = False


# --- Response Schemas ---
class StockData(BaseModel):
    stock: str
    price: float
    likes: int


class RelativeStockData(BaseModel):
    stock: str
    price: float
    rel_likes: int


class StockPricesResponse(BaseModel):
    stockData: Union[StockData, List[RelativeStockData]]


class ErrorResponse(BaseModel):
    error: str
