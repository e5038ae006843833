import re
from typing import Annotated

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict, PydanticBaseSettingsSource, YamlConfigSettingsSource

from tcprobe.bootstrap.config.loader import get_cli_args, get_configfile
from tcprobe.infra.scripted_responder import check_reply_template


class TargetSettings(BaseModel):
    host: Annotated[
        str,
        Field(
            description="Host name or address of the service to probe.",
            default="localhost"
        )
    ]

    port: Annotated[
        int,
        Field(
            description="TCP port of the service to probe.",
            ge=0,
            le=65535
        )
    ]

    timeout_ms: Annotated[
        int,
        Field(
            description=(
                "Idle-read timeout in milliseconds.\n"
                "A burst from the service is considered complete once nothing\n"
                "has been received for this long. Raise it for slow services,\n"
                "lower it to make every exchange faster."
            ),
            default=1000,
            gt=0
        )
    ]


class RuleSettings(BaseModel):
    expect: Annotated[
        str,
        Field(
            description="Regular expression searched in each received burst."
        )
    ]

    reply: Annotated[
        str,
        Field(
            description=(
                "Reply sent when 'expect' matches, followed by a newline.\n"
                "Rendered with str.format: '{0}' is the whole match and named\n"
                "groups are available by name, e.g. '{a}' for '(?P<a>\\d+)'.\n"
                "Literal braces must be doubled: '{{\"cmd\": \"ls\"}}'."
            )
        )
    ]

    @field_validator("expect")
    @classmethod
    def validate_expect(cls, v: str) -> str:
        try:
            re.compile(v)
        except re.error as ex:
            raise ValueError(f"Invalid regular expression {v!r}: {ex}") from ex
        return v

    @model_validator(mode="after")
    def validate_reply(self) -> "RuleSettings":
        check_reply_template(re.compile(self.expect), self.reply)
        return self


class ScriptSettings(BaseModel):
    rules: Annotated[
        list[RuleSettings],
        Field(
            description=(
                "Ordered reply rules. The first rule matching a burst provides\n"
                "the reply; when none matches the session ends."
            ),
            default_factory=list
        )
    ]

    max_replies: Annotated[
        int | None,
        Field(
            description="Upper bound on the number of replies sent in one session.",
            default=None,
            ge=0
        )
    ]

    stop_on_empty: Annotated[
        bool,
        Field(
            description="End the session when the service sends nothing before the idle timeout.",
            default=True
        )
    ]


class ProbeConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TCPROBE_",
        env_nested_delimiter="__",
        extra="ignore"
    )

    target: Annotated[
        TargetSettings,
        Field(
            description=(
                "Service to probe.\n"
                "Defines where to connect and how long to wait for silence\n"
                "before handing a burst to the script."
            )
        )
    ]

    script: Annotated[
        ScriptSettings,
        Field(
            description=(
                "Scripted responder.\n"
                "Decides, burst after burst, what to answer and when to stop."
            ),
            default_factory=ScriptSettings
        )
    ]

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        yaml_file = get_configfile(get_cli_args().config)
        return (
            init_settings,
            env_settings,
            YamlConfigSettingsSource(settings_cls, yaml_file=yaml_file),
        )
