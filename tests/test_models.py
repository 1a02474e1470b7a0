from api_doc_gen.parser.base import Model, ModelProperty, Operation, OperationItems, Parameter, ResponseMessage


class TestParameter:
    def test_wire_names(self):
        p = Parameter(name="id", param_type="path", type="int", data_type="int", required=True, description="pet id")
        assert p.to_swagger() == {
            "name": "id",
            "paramType": "path",
            "type": "int",
            "dataType": "int",
            "required": True,
            "description": "pet id",
        }

    def test_required_false_is_kept(self):
        p = Parameter(name="q", param_type="query", type="string", data_type="string")
        assert p.to_swagger()["required"] is False


class TestOperation:
    def test_minimal_operation(self):
        op = Operation(path="/pets")
        assert op.to_swagger() == {"httpMethod": "GET", "path": "/pets"}

    def test_empty_fields_are_omitted(self):
        op = Operation(
            http_method="POST",
            path="/pets",
            items=OperationItems(),
            response_messages=[ResponseMessage(code=201)],
        )
        assert op.to_swagger() == {"httpMethod": "POST", "responseMessages": [{"code": 201}], "path": "/pets"}

    def test_models_are_not_serialized(self):
        op = Operation(path="/pets", models=[Model(id="Pet")])
        assert "models" not in op.to_swagger()
        assert op.models[0].id == "Pet"

    def test_items_ref_alias(self):
        op = Operation(path="/pets", type="array", items=OperationItems(ref="Pet"))
        assert op.to_swagger()["items"] == {"$ref": "Pet"}

    def test_default_lists_are_not_shared(self):
        a, b = Operation(), Operation()
        a.consumes.append("application/json")
        assert b.consumes == []


class TestModel:
    def test_model_dump(self):
        model = Model(
            id="Pet",
            properties={
                "owner": ModelProperty(ref="Owner"),
                "tags": ModelProperty(type="array", items=OperationItems(type="string")),
            },
        )
        assert model.to_swagger() == {
            "id": "Pet",
            "properties": {
                "owner": {"$ref": "Owner"},
                "tags": {"type": "array", "items": {"type": "string"}},
            },
        }

    def test_equality_is_structural(self):
        assert Model(id="Pet", properties={"id": ModelProperty(type="integer")}) == Model(
            id="Pet", properties={"id": ModelProperty(type="integer")}
        )
