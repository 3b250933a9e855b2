# storefront/api/routers/addresses.py
from typing import List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.schemas import AddressIn, AddressOut, Envelope
from storefront.services.address_service import AddressService

router = APIRouter(prefix="/account/addresses", tags=["addresses"])


@router.get("", response_model=List[AddressOut])
def list_addresses(user_id: int = Query(...), db: Session = Depends(get_db)):
    return AddressService(db).list_addresses(user_id)


@router.post("", response_model=AddressOut, status_code=201)
def create_address(payload: AddressIn, user_id: int = Query(...), db: Session = Depends(get_db)):
    return AddressService(db).create_address(user_id, payload)


@router.get("/{address_id}", response_model=AddressOut)
def get_address(address_id: int, user_id: int = Query(...), db: Session = Depends(get_db)):
    return AddressService(db).get_address(address_id, user_id)


@router.put("/{address_id}", response_model=AddressOut)
def update_address(address_id: int, payload: AddressIn, user_id: int = Query(...), db: Session = Depends(get_db)):
    return AddressService(db).update_address(address_id, user_id, payload)


@router.patch("/{address_id}/default", response_model=AddressOut)
def set_default_address(address_id: int, user_id: int = Query(...), db: Session = Depends(get_db)):
    return AddressService(db).set_default(address_id, user_id)


@router.delete("/{address_id}", response_model=Envelope)
def delete_address(address_id: int, user_id: int = Query(...), db: Session = Depends(get_db)):
    AddressService(db).delete_address(address_id, user_id)
    return Envelope(message="Address deleted successfully")
