"""
Handle loading of signing profiles from INI files and additional curve
definitions from JSON.
"""
import configparser
import json
import logging
import os
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Mapping, Tuple, Union

from curves import CURVES, Curve, validate_curve
from ecdsa_errors import ConfigurationError, InvalidCurveError
from hashing import HashFunction, get_hash_function
from private_key import DEFAULT_MAX_SIGN_ATTEMPTS, PrivateKey
from public_key import PublicKey

logger = logging.getLogger(__name__)

PROFILE_SECTION = 'Signing'
_CURVE_FIELDS = ('name', 'p', 'a', 'b', 'gx', 'gy', 'n')


@dataclass(frozen=True)
class SigningProfile:
    """Settings that control how messages are signed and verified."""

    hash_name: str = 'sha256'
    max_sign_attempts: int = DEFAULT_MAX_SIGN_ATTEMPTS
    low_s: bool = False
    require_low_s: bool = False

    @property
    def hash_function(self) -> HashFunction:
        return get_hash_function(self.hash_name)

    def sign(self, private_key: PrivateKey, message: bytes) -> Tuple[int, int]:
        """Signs message with this profile's hash, retry bound and s policy."""
        return private_key.sign(
            message,
            self.hash_function,
            max_attempts=self.max_sign_attempts,
            low_s=self.low_s,
        )

    def verify(self, public_key: PublicKey, r: int, s: int, message: bytes) -> bool:
        """Verifies (r, s) with this profile's hash and s policy."""
        return public_key.verify(
            r, s, message, self.hash_function, require_low_s=self.require_low_s,
        )


def load_signing_profile(profile_name: str, profiles_dir_path: str) -> SigningProfile:
    """
    Loads a signing profile from an INI file.

    The INI file is expected to have a [Signing] section. Recognised keys are
    hash_function, max_sign_attempts, low_s and require_low_s; missing keys
    keep their defaults.

    Args:
        profile_name (str): The name of the profile to load (e.g., 'strict').
        profiles_dir_path (str): The path to the directory containing profile INI files.

    Returns:
        SigningProfile: The parsed profile.

    Raises:
        FileNotFoundError: If the profile file cannot be found.
        ConfigurationError: If the [Signing] section is missing or a value is invalid.
    """
    profile_file_path = os.path.join(profiles_dir_path, f"{profile_name}.ini")
    config = configparser.ConfigParser()

    if not config.read(profile_file_path):
        raise FileNotFoundError(f"Profile file not found at: {profile_file_path}")

    if PROFILE_SECTION not in config:
        raise ConfigurationError(f"[{PROFILE_SECTION}] section not found in profile: {profile_file_path}")

    section = config[PROFILE_SECTION]
    defaults = SigningProfile()
    try:
        profile = SigningProfile(
            hash_name=section.get('hash_function', defaults.hash_name),
            max_sign_attempts=section.getint('max_sign_attempts', defaults.max_sign_attempts),
            low_s=section.getboolean('low_s', defaults.low_s),
            require_low_s=section.getboolean('require_low_s', defaults.require_low_s),
        )
    except ValueError as e:
        raise ConfigurationError(f"Invalid value in profile {profile_file_path}: {e}") from e

    if profile.max_sign_attempts < 1:
        raise ConfigurationError(f"max_sign_attempts must be at least 1 in profile: {profile_file_path}")
    try:
        profile.hash_function
    except ValueError as e:
        raise ConfigurationError(str(e)) from e

    if profile.require_low_s and not profile.low_s:
        logger.warning("Profile '%s' requires low-s but does not produce it when signing", profile_name)

    logger.info("Loaded signing profile '%s' (hash=%s)", profile_name, profile.hash_name)
    return profile


def _parse_int(value: Union[int, str], field_name: str, curve_name: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"Curve {curve_name}: field '{field_name}' must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value, 0)
        except ValueError:
            pass
    raise ConfigurationError(f"Curve {curve_name}: field '{field_name}' is not an integer: {value!r}")


def _curve_from_definition(definition: Dict) -> Curve:
    if not isinstance(definition, dict):
        raise ConfigurationError(f"Curve definition must be an object, got {type(definition).__name__}")
    missing = [f for f in _CURVE_FIELDS if f not in definition]
    if missing:
        raise ConfigurationError(f"Curve definition missing fields: {', '.join(missing)}")

    name = definition['name']
    if not isinstance(name, str) or not name:
        raise ConfigurationError("Curve name must be a non-empty string")

    p, a, b, gx, gy, n = (_parse_int(definition[f], f, name) for f in _CURVE_FIELDS[1:])
    return Curve(p=p, a=a, b=b, g=(gx, gy), n=n, name=name)


def load_curve_definitions(curves_file_path: str) -> Mapping[str, Curve]:
    """
    Loads additional curves from a JSON file.

    The JSON file is expected to be a list of objects with the keys name, p,
    a, b, gx, gy and n. Integers may be given as JSON numbers or as strings
    in any base Python's int() accepts with base 0 (e.g. '0xfffe...').
    Every curve is validated before it is returned. The built-in registry
    is left untouched.

    Args:
        curves_file_path (str): The path to the JSON file.

    Returns:
        Mapping[str, Curve]: A read-only mapping of the loaded curves by name.

    Raises:
        FileNotFoundError: If the file cannot be found.
        ConfigurationError: If the file is malformed, a name is duplicated or
                            shadows a built-in curve, or a curve is invalid.
    """
    try:
        with open(curves_file_path, 'r') as f:
            definitions = json.load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Curves file not found at: {curves_file_path}")
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Curves file is not valid JSON: {curves_file_path}: {e}") from e

    if not isinstance(definitions, list):
        raise ConfigurationError(f"Curves file must contain a list: {curves_file_path}")

    loaded: Dict[str, Curve] = {}
    for definition in definitions:
        curve = _curve_from_definition(definition)
        if curve.name in CURVES:
            raise ConfigurationError(f"Curve {curve.name} shadows a built-in curve")
        if curve.name in loaded:
            raise ConfigurationError(f"Curve {curve.name} defined more than once")
        try:
            validate_curve(curve)
        except InvalidCurveError as e:
            raise ConfigurationError(str(e)) from e
        loaded[curve.name] = curve

    logger.info("Loaded %d curve definition(s) from %s", len(loaded), curves_file_path)
    return MappingProxyType(loaded)
