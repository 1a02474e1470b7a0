from .context import Context
from .models import Owner, Pet


# @Title getPet
# @Description find a pet by id
# @Param id path int true "pet id"
# @Success 200 {object} models.Pet
# @Failure 404 Pet not found
# @Accept json,xml
# @router /pets/{id} [get]
def get_pet(ctx: Context, id: int) -> Pet:
    ...


# @Title listPets
# @Param limit query int false "page size"
# @Success 200 {array} Pet
# @router /pets [get]
def list_pets(ctx: Context) -> list[Pet]:
    ...


# @Title createPet
# @Param body body Pet true "the new pet"
# @Success 201 Created pet stored
# @Failure 400 invalid pet
# @Accept json
# @router /pets [post]
def create_pet(ctx: Context) -> None:
    ...


def ping(ctx: Context) -> str:
    """Liveness probe.

    @Title ping
    @Success 200 OK pong
    @router /health/ping
    """
    return "pong"


class OwnerHandler:
    # @Title getOwner
    # @Success 200 {object} Owner
    # @router /owners/{id} [get]
    def get(self, ctx: Context, id: int) -> Owner:
        ...

    def helper(self, ctx: Context) -> None:
        """Shared lookup, not an endpoint."""


# @Title internal
# @router /internal
def internal_helper(value: int) -> int:
    return value
