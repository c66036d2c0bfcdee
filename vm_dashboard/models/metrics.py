from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

DnsStatus = Literal["active", "inactive"]


class HostTarget(BaseModel):
    """A monitorable host running windows_exporter."""

    model_config = ConfigDict(frozen=True)

    address: str = Field(..., description="IP address or hostname, e.g. 10.0.0.27")
    label: str = Field(..., description="Display name, e.g. SRVWADDS02")


class ViewState(BaseModel):
    """
    Snapshot of all metrics for one host, produced by a single poll cycle.

    The record is immutable and is replaced as a whole on every cycle. When
    ``online`` is False all sample fields are None.
    """

    model_config = ConfigDict(frozen=True)

    host: str = Field(..., description="Address of the host the samples belong to")
    online: bool = Field(
        ...,
        description="True if the host reported up == 1 in the last cycle",
    )
    cpu: Optional[float] = Field(None, description="CPU utilisation in percent")
    ram: Optional[float] = Field(None, description="RAM usage in percent")
    storage: Optional[float] = Field(None, description="Usage of volume C: in percent")
    network: Optional[float] = Field(
        None,
        description="Received + sent throughput in MiB/s",
    )
    dns: Optional[DnsStatus] = Field(
        None,
        description="State of the DNS service, active or inactive",
    )

    @model_validator(mode="after")
    def _offline_has_no_samples(self) -> "ViewState":
        if not self.online and any(
            value is not None
            for value in (self.cpu, self.ram, self.storage, self.network, self.dns)
        ):
            raise ValueError("an offline ViewState must not carry samples")
        return self

    @classmethod
    def initial(cls, host: str) -> "ViewState":
        # Nothing fetched yet: no samples, but no offline banner either.
        return cls(host=host, online=True)

    @classmethod
    def offline(cls, host: str) -> "ViewState":
        return cls(host=host, online=False)
