"""Zod schema and runtime accessor module output."""

from __future__ import annotations

from typing import List, Sequence

from ..dotenv.merge import resolve_type
from ..models import (
    BooleanType,
    EnumType,
    MergedEnvVar,
    NumberType,
    RawExpression,
    StringType,
    TypeHint,
)
from ..synth import quote_string

IMPORT_LINE = 'import z, { ZodTypeAny } from "zod";'

RUNTIME_MODULE = """\
type ClientEnv = z.infer<z.ZodObject<typeof clientEnvSchemas>>;

export const clientEnv: ClientEnv = new Proxy({} as ClientEnv, {
  get(_, prop: string) {
    return lookupEnv(prop, clientEnvSchemas, () => {
      throw new Error(
        `${prop} is not defined for client side environment variables.`
      );
    });
  },
});

type Env = z.infer<z.ZodObject<typeof serverEnvSchemas>>;

export const env: Env = new Proxy({} as Env, {
  get(_, prop: string) {
    if (prop.startsWith("NEXT_PUBLIC_")) {
      return Reflect.get(clientEnv, prop);
    }
    return lookupEnv(prop, serverEnvSchemas, () => {
      throw new Error(
        `${prop} is not defined for server side environment variables.`
      );
    });
  },
});

const cache: Record<string, unknown> = {};

function lookupEnv<T extends Record<string, ZodTypeAny>>(
  prop: string,
  parsers: T,
  onNotFound: () => never
) {
  if (prop in cache) {
    return cache[prop];
  }

  try {
    if (prop in parsers) {
      const parsed = parsers[prop as keyof typeof parsers]?.parse(
        processEnv[prop as keyof typeof processEnv],
        { path: [prop] }
      );

      cache[prop] = parsed;

      return parsed;
    }
    onNotFound();
  } catch (e) {
    throw new BadEnvError(`failed to read ${prop} from process.env`, e);
  }
}

class BadEnvError extends Error {
  constructor(message: string, public readonly cause: unknown) {
    super(
      cause instanceof Error ? [message, cause.message].join("\\n ↳ ") : message
    );
    this.name = "BadEnvError";
  }
}
"""


def zod_expression(hint: TypeHint) -> str:
    """Return the zod schema expression for a resolved type."""
    if isinstance(hint, StringType):
        return "z.string()"
    if isinstance(hint, NumberType):
        return "z.coerce.number()"
    if isinstance(hint, BooleanType):
        return 'z.enum(["true", "false"]).transform((value) => value === "true")'
    if isinstance(hint, EnumType):
        return "z.enum([" + ", ".join(quote_string(value) for value in hint.values) + "])"
    if isinstance(hint, RawExpression):
        return hint.text
    raise TypeError(f"Unsupported type hint: {hint!r}")


def schema_entry(variable: MergedEnvVar) -> str:
    expression = zod_expression(resolve_type(variable))
    if variable.resolved_hint is not None and variable.provenance is not None:
        expression += (
            f" /* from {quote_string(variable.provenance.source_file)}"
            f" on line {variable.provenance.source_line} */"
        )
    return f"  {variable.name}: {expression},"


def render_zod_module(variables: Sequence[MergedEnvVar]) -> str:
    """Render ``env.parsed.ts``: schema maps, runtime accessors and ``processEnv``."""
    client = [variable for variable in variables if variable.is_client_exposed]
    server = [variable for variable in variables if not variable.is_client_exposed]

    lines: List[str] = [IMPORT_LINE, "", "const clientEnvSchemas = {"]
    lines.extend(schema_entry(variable) for variable in client)
    lines.extend(["};", "", "const serverEnvSchemas = {", "  ...clientEnvSchemas,"])
    lines.extend(schema_entry(variable) for variable in server)
    lines.extend(["};", "", RUNTIME_MODULE, "const processEnv = {"])
    lines.extend(f"  {variable.name}: process.env.{variable.name}," for variable in variables)
    lines.append("};")
    return "\n".join(lines) + "\n"


__all__ = ["IMPORT_LINE", "RUNTIME_MODULE", "render_zod_module", "schema_entry", "zod_expression"]
