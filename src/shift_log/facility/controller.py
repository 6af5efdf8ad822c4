from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import caller_identity, facility_json, json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    ops = container.operations

    @app.route("/locations", methods=["GET"], endpoint="list_locations")
    def list_locations():
        location = ops.get_facility_location(caller_identity(container.auth_verifier))
        return jsonify([facility_json(location)] if location else [])

    @app.route("/locations", methods=["PUT"], endpoint="set_location")
    def set_location():
        body = json_body()
        location = ops.set_facility_location(
            caller_identity(container.auth_verifier),
            name=body.get("name"),
            latitude=body.get("latitude"),
            longitude=body.get("longitude"),
            radius=body.get("radius"),
        )
        return jsonify(facility_json(location))
