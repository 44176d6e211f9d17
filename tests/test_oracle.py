"""Tests for the TypeScript declaration oracle and end-to-end extraction."""

import pytest

from commandschema.commands import CommandRequest, extract_commands, parse_commands
from commandschema.config import ExtractionOptions, RefPolicy
from commandschema.errors import ErrorKind
from commandschema.ir.models import CommandTypeShape, ParamKind, ParamShape
from commandschema.oracle import DeclarationKind, TypeOracle
from commandschema.typescript import TypeScriptOracle, parse_source, parse_type
from commandschema.typescript.types import TypeFlag


def _oracle(source: str, **kwargs) -> TypeScriptOracle:
    return TypeScriptOracle(parse_source(source), **kwargs)


def _extract(source: str, type_expr: str, *names: str, options=None):
    oracle = _oracle(source, **({"int32_type_names": options.int32_type_names} if options else {}))
    request = CommandRequest(type_node=parse_type(type_expr), supported_commands=names)
    return extract_commands(request, oracle, options)


COMPONENT_SPEC = """
import type {Int32} from 'react-native/Libraries/Types/CodegenTypes';
import * as React from 'react';

type Ref<T> = React.Ref<T>;

export interface NativeCommands {
  focus(viewRef: Ref<'MyView'>, durationMs: Int32): void;
  setColor: (ref: Ref<'MyView'>, color: string, animated: boolean) => void;
  blur?(viewRef: React.Ref<'MyView'>): void;
  scrollTo?: (ref: Ref<'MyView'>, x: Int32, y: Int32) => void;
}

export const Commands = codegenNativeCommands<NativeCommands>({
  supportedCommands: ['focus', 'setColor', 'blur', 'scrollTo'],
});
"""


# --- Oracle queries ---


def test_oracle_satisfies_protocol():
    assert isinstance(_oracle(""), TypeOracle)


def test_resolve_intrinsics_and_literals():
    oracle = _oracle("")
    assert oracle.resolve_type(parse_type("string")).flag == TypeFlag.STRING
    assert oracle.resolve_type(parse_type("'a'")).flag == TypeFlag.STRING_LITERAL
    assert oracle.resolve_type(parse_type("false")).flag == TypeFlag.BOOLEAN_LITERAL
    assert oracle.resolve_type(parse_type("void")).flag == TypeFlag.VOID
    assert oracle.resolve_type(None).flag == TypeFlag.ANY


def test_predicates():
    oracle = _oracle("type Int32 = number; type Mode = 'a' | 'b';")

    def resolve(text):
        return oracle.resolve_type(parse_type(text))

    assert oracle.is_string_like(resolve("string"))
    assert oracle.is_string_like(resolve("Mode"))
    assert oracle.is_string_like(resolve("'x' | 'y'"))
    assert not oracle.is_string_like(resolve("'x' | 1"))
    assert oracle.is_boolean_like(resolve("boolean"))
    assert oracle.is_boolean_like(resolve("true | false"))
    assert oracle.is_int32_like(resolve("Int32"))
    assert not oracle.is_int32_like(resolve("number"))
    assert oracle.is_void_like(resolve("void"))
    assert not oracle.is_void_like(resolve("undefined"))


def test_imported_names_are_opaque_but_named():
    oracle = _oracle("import type {Int32} from 'react-native/Libraries/Types/CodegenTypes';")
    int32 = oracle.resolve_type(parse_type("Int32"))
    assert int32.flag == TypeFlag.OPAQUE
    assert oracle.is_int32_like(int32)
    assert oracle.is_int32_like(oracle.resolve_type(parse_type("CodegenTypes.Int32")))


def test_local_alias_of_int32_keeps_int32():
    oracle = _oracle(
        "import type {Int32} from 'react-native/Libraries/Types/CodegenTypes';\n"
        "type Duration = Int32;\ntype Delay = Duration;"
    )
    delay = oracle.resolve_type(parse_type("Delay"))
    assert delay.aliases == ("Delay", "Duration", "Int32")
    assert oracle.is_int32_like(delay)


def test_renamed_import_of_int32():
    oracle = _oracle("import type {Int32 as I32} from 'react-native/Libraries/Types/CodegenTypes';")
    assert oracle.is_int32_like(oracle.resolve_type(parse_type("I32")))


def test_custom_int32_names():
    oracle = _oracle("", int32_type_names=("I32",))
    assert oracle.is_int32_like(oracle.resolve_type(parse_type("I32")))
    assert not oracle.is_int32_like(oracle.resolve_type(parse_type("Int32")))


def test_interface_members_and_declarations():
    oracle = _oracle(COMPONENT_SPEC)
    commands = oracle.resolve_type(parse_type("NativeCommands"))
    assert sorted(commands.members) == ["blur", "focus", "scrollTo", "setColor"]
    member = oracle.get_member(commands, "focus")
    assert len(oracle.get_declarations(member)) == 1
    assert oracle.get_member(commands, "missing") is None


def test_declaration_kinds():
    source = "interface C { focus(r: Ref<'V'>): void; color?: string; (r: Ref<'V'>): void }"
    (interface,) = parse_source(source).statements
    method, prop, call = interface.members
    oracle = _oracle(source)

    assert oracle.get_declaration_kind(method) == DeclarationKind.METHOD
    assert oracle.get_declaration_kind(call) == DeclarationKind.METHOD
    assert oracle.get_declaration_kind(prop) == DeclarationKind.PROPERTY
    assert oracle.get_declaration_kind(interface) == DeclarationKind.OTHER
    assert oracle.is_optional(prop)
    assert not oracle.is_optional(call)
    assert oracle.get_declaration_signature(method).parameters[0].name == "r"


def test_type_reference_queries():
    oracle = _oracle("")
    view_ref = parse_type("React.Ref<'MyView'>")
    assert oracle.get_reference_name(view_ref) == "React.Ref"
    (argument,) = oracle.get_type_arguments(view_ref)
    assert oracle.is_string_literal(argument)
    assert oracle.get_reference_name(parse_type("string")) is None
    assert oracle.get_reference_name(None) is None
    assert oracle.get_type_text(None) == "any"


def test_named_types_resolve_to_same_instance():
    oracle = _oracle(COMPONENT_SPEC)
    assert oracle.resolve_type(parse_type("NativeCommands")) is oracle.resolve_type(parse_type("NativeCommands"))


def test_call_signatures_of_function_type():
    oracle = _oracle("")
    fn = oracle.resolve_type(parse_type("(ref: Ref<'V'>, on: boolean) => void"))
    (signature,) = oracle.get_call_signatures(fn)
    assert [p.name for p in oracle.get_parameters(signature)] == ["ref", "on"]
    assert oracle.is_void_like(oracle.get_return_type(signature))
    assert oracle.get_call_signatures(oracle.resolve_type(parse_type("string"))) == ()


def test_recursive_declarations_terminate():
    oracle = _oracle("interface Node { next: Node }\ntype A = B;\ntype B = A;")
    node = oracle.resolve_type(parse_type("Node"))
    next_decl = oracle.get_declarations(oracle.get_member(node, "next"))[0]
    assert oracle.resolve_type(next_decl.type) is node
    assert oracle.resolve_type(parse_type("A")).flag == TypeFlag.ANY


def test_unsupported_type_nodes_are_opaque():
    oracle = _oracle("")
    assert oracle.resolve_type(parse_type("keyof Props")).flag == TypeFlag.OPAQUE
    assert oracle.resolve_type(parse_type("typeof x")).flag == TypeFlag.OPAQUE


# --- End-to-end extraction ---


def test_extract_component_commands():
    commands = parse_commands(
        CommandRequest(
            type_node=parse_type("NativeCommands"),
            supported_commands=("focus", "setColor", "blur", "scrollTo"),
        ),
        _oracle(COMPONENT_SPEC),
    )
    assert commands == [
        CommandTypeShape(name="focus", parameters=(ParamShape("durationMs", ParamKind.INT32),)),
        CommandTypeShape(
            name="setColor",
            parameters=(ParamShape("color", ParamKind.STRING), ParamShape("animated", ParamKind.BOOLEAN)),
        ),
        CommandTypeShape(name="blur", optional=True),
        CommandTypeShape(
            name="scrollTo",
            optional=True,
            parameters=(ParamShape("x", ParamKind.INT32), ParamShape("y", ParamKind.INT32)),
        ),
    ]


def test_extract_to_schema():
    result = _extract(COMPONENT_SPEC, "NativeCommands", "focus")
    assert [c.to_schema() for c in result.commands] == [
        {
            "name": "focus",
            "optional": False,
            "typeAnnotation": {
                "type": "FunctionTypeAnnotation",
                "params": [{"name": "durationMs", "typeAnnotation": {"type": "Int32TypeAnnotation"}}],
            },
        }
    ]


def test_extract_inherited_and_intersected_members():
    source = """
    interface Base { blur(ref: Ref<'V'>): void }
    interface Commands extends Base { focus(ref: Ref<'V'>): void }
    type Extra = { reset: (ref: Ref<'V'>) => void };
    type All = Commands & Extra;
    """
    result = _extract(source, "All", "reset", "blur", "focus")
    assert [c.name for c in result.commands] == ["reset", "blur", "focus"]


def test_extract_from_inline_type_literal():
    result = _extract("", "{ toggle(ref: Ref<'V'>, on: boolean): void }", "toggle")
    assert result.commands[0].parameters == (ParamShape("on", ParamKind.BOOLEAN),)


def test_extract_property_with_aliased_function_type():
    source = """
    type Handler = (ref: Ref<'V'>, label: Label) => void;
    type Label = 'start' | 'stop';
    interface Commands { run: Handler }
    """
    result = _extract(source, "Commands", "run")
    assert result.commands[0].parameters == (ParamShape("label", ParamKind.STRING),)


def test_generic_method_rejected():
    result = _extract("interface C { focus<T>(ref: Ref<'V'>, v: T): void }", "C", "focus")
    assert result.error.kind == ErrorKind.GENERIC_NOT_ALLOWED
    assert result.error.message == "Command focus in type C should not be generic."


def test_generic_property_callable_rejected():
    result = _extract("interface C { focus: <T>(ref: Ref<'V'>) => void }", "C", "focus")
    assert result.error.kind == ErrorKind.GENERIC_NOT_ALLOWED


def test_overloaded_method_rejected():
    source = """
    interface C {
      focus(ref: Ref<'V'>): void;
      focus(ref: Ref<'V'>, ms: Int32): void;
    }
    """
    result = _extract(source, "C", "focus")
    assert result.error.kind == ErrorKind.AMBIGUOUS_DECLARATION


def test_merged_interface_redeclaring_member_rejected():
    source = "interface C { a(r: Ref<'V'>): void }\ninterface C { a(r: Ref<'V'>): void }"
    assert _extract(source, "C", "a").error.kind == ErrorKind.AMBIGUOUS_DECLARATION


def test_overloaded_property_type_rejected():
    source = "interface C { focus: { (r: Ref<'V'>): void; (r: Ref<'V'>, s: string): void } }"
    assert _extract(source, "C", "focus").error.kind == ErrorKind.NOT_A_FUNCTION


def test_destructured_parameter_in_property_rejected():
    source = "interface C { move: (ref: Ref<'V'>, {x, y}: Point) => void }"
    result = _extract(source, "C", "move")
    assert result.error.kind == ErrorKind.MALFORMED_PARAMETER
    assert result.error.parameter == "{x, y}"


def test_unsupported_array_parameter_names_it():
    result = _extract("interface C { load(ref: Ref<'V'>, urls: string[]): void }", "C", "load")
    assert result.error.kind == ErrorKind.UNSUPPORTED_PARAM_TYPE
    assert result.error.parameter == "urls"
    assert result.error.parameter_type == "string[]"


def test_object_parameter_rejected():
    result = _extract("interface C { load(ref: Ref<'V'>, opts: {a: string}): void }", "C", "load")
    assert result.error.kind == ErrorKind.UNSUPPORTED_PARAM_TYPE


def test_non_void_and_missing_ref():
    assert _extract("interface C { a(r: Ref<'V'>): boolean }", "C", "a").error.kind == ErrorKind.NON_VOID_RETURN
    assert _extract("interface C { a(): void }", "C", "a").error.kind == ErrorKind.MISSING_REF_PARAMETER
    assert _extract("interface C { a(r: number): void }", "C", "a").error.kind == ErrorKind.INVALID_REF_PARAMETER


def test_missing_command():
    result = _extract(COMPONENT_SPEC, "NativeCommands", "focus", "zoom")
    assert result.error.kind == ErrorKind.MEMBER_NOT_FOUND
    assert result.error.message == "Unable to find command zoom in type NativeCommands."
    assert result.commands == []


def test_unknown_component_type():
    result = _extract("", "ImportedCommands", "focus")
    assert result.error.kind == ErrorKind.MEMBER_NOT_FOUND


@pytest.mark.parametrize("first", ["Ref<'MyView'>", "React.Ref<'MyView'>"])
def test_strict_ref_policy_accepts_view_refs(first):
    options = ExtractionOptions(ref_policy=RefPolicy.STRICT)
    source = f"interface C {{ a(r: {first}): void }}"
    assert _extract(source, "C", "a", options=options).passed


def test_strict_ref_policy_rejects_alias_wrapper():
    options = ExtractionOptions(ref_policy=RefPolicy.STRICT)
    source = "type ViewRef = Ref<'V'>;\ninterface C { a(r: ViewRef): void }"
    result = _extract(source, "C", "a", options=options)
    assert result.error.kind == ErrorKind.INVALID_REF_PARAMETER
    assert result.error.parameter_type == "ViewRef"


def test_extract_through_local_int32_alias():
    source = """
    import type {Int32} from 'react-native/Libraries/Types/CodegenTypes';
    import type {HostComponent, ViewProps} from 'react-native';

    type Duration = Int32;

    interface NativeCommands {
      readonly focus: (viewRef: React.ElementRef<HostComponent<ViewProps>>, durationMs: Duration) => void;
    }
    """
    result = _extract(source, "NativeCommands", "focus")
    assert result.passed, result.summary()
    assert result.commands[0].parameters == (ParamShape("durationMs", ParamKind.INT32),)


def test_extract_with_renamed_int32_import():
    source = """
    import type {Int32 as I32} from 'react-native/Libraries/Types/CodegenTypes';
    interface NativeCommands { scrollTo(viewRef: Ref<'V'>, x: I32): void }
    """
    result = _extract(source, "NativeCommands", "scrollTo")
    assert result.commands[0].parameters == (ParamShape("x", ParamKind.INT32),)
