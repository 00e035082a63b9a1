"""Cisco IOS / Arista EOS running-config grammar.

Loaded at runtime as a custom lexer script; must stay self-contained.
"""

from pygments.lexer import RegexLexer, words
from pygments.token import Comment, Keyword, Name, Number, Operator, String, Text, Whitespace


class CustomLexer(RegexLexer):
    name = "Cisco IOS"
    aliases = ["cisco"]
    filenames = ["*.ios", "*.eos"]

    tokens = {
        "root": [
            (r"^\s*!.*$", Comment.Single),
            (r"\n", Whitespace),
            (r"[^\S\n]+", Whitespace),
            (
                words(
                    (
                        "aaa", "access-list", "address", "banner", "bgp", "boot", "channel-group",
                        "class-map", "clock", "crypto", "description", "enable", "encapsulation",
                        "end", "exit", "hostname", "interface", "ip", "ipv6", "line", "logging",
                        "mtu", "neighbor", "network", "no", "ntp", "permit", "deny", "policy-map",
                        "redistribute", "remote-as", "route-map", "router", "service", "shutdown",
                        "snmp-server", "spanning-tree", "speed", "duplex", "switchport", "trunk",
                        "access", "mode", "username", "version", "vlan", "vrf",
                    ),
                    prefix=r"(?<![\w-])",
                    suffix=r"(?![\w-])",
                ),
                Keyword,
            ),
            (
                r"(GigabitEthernet|FastEthernet|TenGigabitEthernet|Ethernet|Loopback|Vlan|"
                r"Port-channel|Management|Tunnel|Serial)[\d/.:]*",
                Name.Class,
            ),
            (r"\d{1,3}(\.\d{1,3}){3}(/\d{1,2})?", Number),
            (r"[0-9a-fA-F]{4}\.[0-9a-fA-F]{4}\.[0-9a-fA-F]{4}", Number.Hex),
            (r'"[^"\n]*"', String),
            (r"\d+", Number.Integer),
            (r"[=<>|]", Operator),
            (r"\S", Text),
        ],
    }
