from typing import Annotated, Dict

from fastapi import APIRouter, Depends, HTTPException, Query, status

from models.person import PersonCollection, PersonQuery, PersonRead, PersonUpdate
from utils.hateoas import Hypermedia, get_hypermedia, hateoas_people, hateoas_person


router = APIRouter(
    prefix="/people",
    tags=["People"],
)

# Sample data; the service keeps no persistent state
PEOPLE: Dict[int, PersonRead] = {
    1: PersonRead(id=1, first_name="Ada", last_name="Lovelace", email="ada@example.com"),
    2: PersonRead(id=2, first_name="Alan", last_name="Turing", email="alan@example.com"),
    3: PersonRead(id=3, first_name="Grace", last_name="Hopper", email="grace@example.com"),
}


def _get_person_or_404(person_id: int) -> PersonRead:
    person = PEOPLE.get(person_id)
    if person is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Person not found")
    return person


# -----------------------------------------------------------------------------
# GET Endpoints
# -----------------------------------------------------------------------------

@router.get("/", response_model=PersonCollection, response_model_exclude_none=True, name="list_people")
async def list_people(
    query: Annotated[PersonQuery, Query()],
    hypermedia: Hypermedia = Depends(get_hypermedia),
):
    people = list(PEOPLE.values())

    if query.search:
        needle = query.search.lower()
        people = [
            p for p in people
            if needle in p.first_name.lower() or needle in p.last_name.lower() or needle in p.email.lower()
        ]

    if query.sort_by in PersonRead.model_fields:
        people.sort(key=lambda p: getattr(p, query.sort_by))

    page = people[query.skip:query.skip + query.limit]
    collection = PersonCollection(items=[hateoas_person(hypermedia, p) for p in page])
    return hateoas_people(hypermedia, collection)


@router.get("/{person_id}", response_model=PersonRead, response_model_exclude_none=True, name="get_person")
async def get_person(
    person_id: int,
    hypermedia: Hypermedia = Depends(get_hypermedia),
):
    return hateoas_person(hypermedia, _get_person_or_404(person_id))


# -----------------------------------------------------------------------------
# PATCH Endpoint
# -----------------------------------------------------------------------------

@router.patch("/{person_id}", response_model=PersonRead, response_model_exclude_none=True, name="update_person")
async def update_person(
    person_id: int,
    person_update: PersonUpdate,
    hypermedia: Hypermedia = Depends(get_hypermedia),
):
    person = _get_person_or_404(person_id)

    update_data = person_update.model_dump(exclude_unset=True)
    if not update_data:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No fields provided for update",
        )

    person = person.model_copy(update=update_data)
    PEOPLE[person_id] = person
    return hateoas_person(hypermedia, person)


# -----------------------------------------------------------------------------
# DELETE Endpoint
# -----------------------------------------------------------------------------

@router.delete("/{person_id}", status_code=204, name="delete_person")
async def delete_person(person_id: int):
    _get_person_or_404(person_id)
    del PEOPLE[person_id]
