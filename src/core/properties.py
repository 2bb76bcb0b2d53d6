"""Lectura de ficheros `.properties` (formato Java).

Por qué jproperties:
- Reproduce `java.util.Properties.load`: comentarios `#`/`!`, separadores `=`,
  `:` o espacio, continuaciones con `\\`, escapes `\\t`, `\\uXXXX`...
- Los bytes se decodifican en ISO-8859-1, igual que
  `Properties.load(InputStream)` en el script de Gradle; así una contraseña
  no ASCII llega con el mismo valor que inyectaría Gradle.
"""

from __future__ import annotations

from pathlib import Path

from jproperties import ParseError, Properties

from core.domain.models import PropertiesSource
from core.errors import MissingPropertiesFileError, SigningError

ENCODING = "iso-8859-1"


class PropertiesSyntaxError(SigningError):
    """The properties text could not be parsed (e.g. a malformed `\\uXXXX` escape)."""


def parse_properties(text: str | bytes) -> dict[str, str]:
    """Parsea texto `.properties` a un dict ordenado.

    Claves duplicadas: gana el último valor, se conserva la primera posición.
    Los `bytes` se decodifican en ISO-8859-1.
    """

    props = Properties()
    try:
        props.load(text, encoding=ENCODING)
    except ParseError as exc:
        raise PropertiesSyntaxError(str(exc)) from exc
    return dict(props.properties)


def load_properties(path: Path) -> PropertiesSource:
    """Carga `path` como `PropertiesSource`.

    Lanza `MissingPropertiesFileError` si el fichero no existe; el llamador
    decide si es fatal.
    """

    if not path.is_file():
        raise MissingPropertiesFileError(path)

    return PropertiesSource.from_mapping(parse_properties(path.read_bytes()), path=path)
