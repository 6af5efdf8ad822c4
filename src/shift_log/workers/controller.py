from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import caller_identity, json_body, worker_json
from ..container import Container


def register(app: Flask, container: Container) -> None:
    ops = container.operations

    def identity():
        return caller_identity(container.auth_verifier)

    @app.route("/me", methods=["GET"], endpoint="me")
    def me():
        return jsonify(worker_json(ops.me(identity())))

    @app.route("/me", methods=["PATCH"], endpoint="update_me")
    def update_me():
        body = json_body()
        worker = ops.update_profile(identity(), name=body.get("name"), email=body.get("email"))
        return jsonify(worker_json(worker))

    @app.route("/workers", endpoint="list_workers")
    def list_workers():
        return jsonify(
            [{**worker_json(s.worker), "shift_count": s.shift_count} for s in ops.list_workers(identity())]
        )

    @app.route("/workers/<int:worker_id>/role", methods=["PATCH"], endpoint="change_role")
    def change_role(worker_id: int):
        body = json_body()
        worker = ops.change_role(identity(), worker_id, body.get("role"))
        return jsonify(worker_json(worker))
