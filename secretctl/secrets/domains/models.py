"""Domain models for secret management."""
import json
from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class Secret:
    """Represents a secret stored in Secret Manager.

    Credentials are carried only while building a create request; they are
    never part of the JSON view.
    """
    name: str
    id: str = ""
    labels: Dict[str, str] = field(default_factory=dict)
    description: str = ""
    username: str = field(default="", repr=False)
    password: str = field(default="", repr=False)

    def to_json(self) -> str:
        """Public view of the secret, tab-indented."""
        view = {
            "ID": self.id,
            "Name": self.name,
            "Labels": dict(self.labels),
            "Description": self.description,
        }
        return json.dumps(view, indent="\t")

    def credentials_json(self) -> str:
        """Payload stored as the secret value."""
        return json.dumps({"username": self.username, "password": self.password})


def new_secret(name: str, username: str, password: str, description: str,
               labels: Optional[Dict[str, str]] = None) -> Secret:
    return Secret(
        name=name,
        labels=dict(labels or {}),
        description=description,
        username=username,
        password=password,
    )


@dataclass
class CreateSecretOptions:
    """Flags of the create command."""
    label: List[str] = field(default_factory=list)
    username: str = ""
    password: str = ""
    description: str = ""


@dataclass
class DeleteSecretOptions:
    """Flags of the delete command."""
    recover: bool = False


@dataclass
class CallContext:
    """Values every remote call of one invocation is bound to."""
    project_id: Optional[str] = None
    timeout: Optional[float] = None
