# @APIVersion 1.0.0
# @APITitle Petstore API
# @APIDescription Pets and their owners
# @BasePath http://127.0.0.1:3000/
# @Contact pets@example.com
# @TermsOfServiceUrl http://example.com/terms
# @License BSD
# @LicenseUrl http://example.com/license
"""Petstore web service."""

from petstore.app import create_app


def main():
    create_app().run("localhost", 3000)
