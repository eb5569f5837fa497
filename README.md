# fivegsim

`fivegsim` provides building blocks for simulating a 5G network in plain Python:

- `fivegsim.gtp_packet`: GTP-U (GTPv1-U) packet encoding and decoding.
- `fivegsim.gtp_tunnel`: a UDP GTP-U endpoint that sends each received G-PDU to a
  handler chosen by its TEID.
- `fivegsim.amf_config` and `fivegsim.gnb_config`: AMF and gNB startup settings,
  with YAML loading merged over the defaults.
- `fivegsim.amf_nas_transport`: wrapping session-management messages in a NAS
  DL NAS Transport, and DNN selection and checking.
- `fivegsim.gnb_plmn`: BCD encoding and decoding of PLMN identities.
- `fivegsim.gnb_packets`: the Internet checksum, ICMP echo request building and
  IPv4 packet summaries.
- `fivegsim.gnb_relay`: the per-UE session table that a gNB uses to relay GTP-U
  between UEs and the UPF.

Install the `test` extra to run the tests with pytest.

## GTP-U packets

```python
from fivegsim.gtp_packet import decode, encode, new_echo_request, new_gpdu

inner = bytes.fromhex("4500001c00010000400100000a00000108080808")
wire = encode(new_gpdu(0xDEADBEEF, inner))
packet = decode(wire)
print(packet)  # GTP-U[G-PDU TEID=0xDEADBEEF payload=20 bytes]

echo = decode(encode(new_echo_request(42)))
assert echo.header.sequence_number == 42
```

`encode` works out the length field from the payload. It adds the four optional
header octets when any of the E, S or PN flags is set. `decode` raises
`GTPDecodeError` (a `ValueError`) when the packet is truncated, when its version
is not 1, or when its length field does not match the data.
`new_echo_response` builds the matching Echo Response.

## GTP-U tunnels

```python
import threading

from fivegsim.gtp_tunnel import Tunnel

def on_packet(teid, src, inner):
    print(f"TEID 0x{teid:08X} from {src}: {len(inner)} bytes")

with Tunnel(0) as receiver, Tunnel(0) as sender:
    receiver.register_teid(0xCAFE, on_packet)
    threading.Thread(target=receiver.serve, daemon=True).start()
    sender.send_gpdu(("127.0.0.1", receiver.local_addr()[1]), 0xCAFE, b"\x45\x00")
```

Pass port `0` to let the operating system choose a port. `local_addr()` returns
the bound `(host, port)`. `serve()` blocks until `close()` is called, and each
packet it receives is dispatched on its own thread. A G-PDU whose TEID has no
handler of its own goes to the handler set with `register_default_handler`.
Echo Requests are answered automatically unless a handler is set with
`set_echo_handler`. `allocate_teid()` hands out sequential TEIDs, starting at 1.
Set `capture` to a callable to receive `("tx" | "rx", raw_bytes)` for every
G-PDU the tunnel sends and every packet it receives.

## Configuration

```python
from fivegsim.amf_config import AMFConfig, load_config as load_amf_config
from fivegsim.gnb_config import GNBConfig, load_config as load_gnb_config

amf_cfg = AMFConfig()                      # name "5g-sim-amf", PLMN "00101", SCTP port 38412
gnb_cfg = load_gnb_config("gnb.yaml")      # YAML keys override the GNBConfig defaults
```

YAML keys use the dataclass field names, such as `plmn`, `sctp_port` or
`upf_gtp_port`. Keys the config does not know are ignored. A file that cannot be
read raises `OSError`. Malformed YAML, or a value of the wrong type or range,
raises `ValueError`.

## NAS transport helpers

```python
from fivegsim.amf_nas_transport import build_dl_nas_transport_mm, dnn_allowed, resolve_dnn

msg = build_dl_nas_transport_mm(1, b"\x2e\x01\x00\xc2")
# 7E 00 68 01 | 00 04 | <container> | 12 01

resolve_dnn("")                         # "internet"
dnn_allowed("ims", ["internet"])        # False; an empty allow-list permits any DNN
```

## PLMN and IPv4 helpers

```python
from fivegsim.gnb_plmn import decode_plmn, encode_plmn
from fivegsim.gnb_packets import build_icmp_echo_request, describe_ipv4, internet_checksum

assert encode_plmn("00101") == b"\x00\xf1\x10"
assert decode_plmn(b"\x00\x01\x10") == "001001"

ping = build_icmp_echo_request("10.45.0.2", "8.8.8.8", 1, 42)
assert internet_checksum(ping[:20]) == 0  # a valid IPv4 header sums to zero
summary = describe_ipv4(ping)             # src, dst, protocol_name "ICMP", length, is_echo_reply
```

`encode_plmn` raises `ValueError` unless it is given 5 or 6 digits.
`decode_plmn` returns `"unknown"` when it is given fewer than 3 octets.
`build_icmp_echo_request` raises `ValueError` for addresses that are not IPv4.

## Relay session table

```python
from fivegsim.gnb_relay import SessionTable, UETunnelSession, plausible_ue_ipv4

table = SessionTable()
table.register(UETunnelSession(ran_ue_ngap_id=1, ul_teid=0x10, dl_teid=1,
                               upf_addr=("127.0.0.1", 2152)))

session = table.resolve_for_uplink(("127.0.0.1", 40000), "10.45.0.2")
assert table.lookup_by_dl_teid(1) is session
```

Uplink is matched to a session by the UE's UDP source address. When no session
matches, the first session with no UE address yet is claimed and bound to that
address. `plausible_ue_ipv4` rejects packets that could not come from a UE:
non-IPv4 packets, packets shorter than an IPv4 header, and sources in 0.0.0.0/8
or at 224.0.0.0 and above.

## What the package does not do

`fivegsim` is a library of parts. It does not run any network function:

- There is no AMF process. Nothing handles NG Setup, keeps UE contexts or
  allocates GUTIs, and there is no HTTP endpoint that lists UEs.
- There is no gNB process. Nothing connects to an AMF, opens the UE-facing
  relay socket or tells the UPF where to send downlink traffic.
  `SessionTable` holds the relay state, and wiring it to `Tunnel` sockets is
  left to the caller.
- It has no NGAP or SCTP support, and it installs no command-line programs.