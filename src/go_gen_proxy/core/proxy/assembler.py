"""
Output Assembler.

Combines the per-file decisions into one proxy file:

1. Classify every declaration; drop the file if nothing survives.
2. Pick the import alias of the original package so it clashes with no name
   visible in the file.
3. Rewrite kept values/types and synthesize kept functions.
4. Emit the referenced imports followed by the original package import.
5. Prefix the generated-code marker to the original header comments.
"""

import copy
from typing import List, Optional, Set

from go_gen_proxy.config import GeneratorConfig
from go_gen_proxy.core.golang.nodes import (
  BasicLit,
  CommentGroup,
  GoNode,
  ImportGroup,
  ImportSpec,
  SourceFile,
)
from go_gen_proxy.core.loader import PackageSource
from go_gen_proxy.core.proxy.classifier import (
  SKIP,
  Exclusion,
  KeptFunction,
  KeptTypes,
  KeptValues,
  SymbolClassifier,
  Verdict,
)
from go_gen_proxy.core.proxy.declarations import DeclarationRewriter
from go_gen_proxy.core.proxy.functions import HOOK_HELPER, FunctionProxySynthesizer
from go_gen_proxy.core.proxy.imports import ImportResolver, ImportTable
from go_gen_proxy.core.tracer import get_tracer

MARKER_TEMPLATE = "// Code generated by {tool}. Proxy for {path}. DO NOT EDIT."


def generated_marker(tool_identity: str, import_path: str) -> CommentGroup:
  """
  The first line of every generated file.

  Args:
      tool_identity (str): Generator name (e.g. its module path).
      import_path (str): Import path of the proxied package, written quoted.

  Returns:
      CommentGroup: A single-line comment group.
  """
  path = str(BasicLit.string(import_path))
  return CommentGroup([MARKER_TEMPLATE.format(tool=tool_identity, path=path)])


def choose_alias(base: str, taken: Set[str]) -> str:
  """Returns `base`, or `base` with the smallest numeric suffix not in `taken`."""
  if base not in taken:
    return base
  n = 1
  while f"{base}{n}" in taken:
    n += 1
  return f"{base}{n}"


class OutputAssembler:
  """
  Builds proxy files for the files of one package.

  Attributes:
      exclusions (List[Exclusion]): Exported functions rejected across all files assembled so far.
  """

  def __init__(
    self,
    package: PackageSource,
    config: GeneratorConfig,
    resolver: ImportResolver,
    reserved: Optional[Set[str]] = None,
  ):
    """
    Args:
        package (PackageSource): The parsed original package.
        config (GeneratorConfig): Mode and naming settings.
        resolver (ImportResolver): Resolves the imports of each file.
        reserved (Optional[Set[str]]): Extra package-scope names the proxy
            declares (the sidecar identifiers), avoided by the alias.
    """
    self.package = package
    self.config = config
    self.resolver = resolver
    self.instrumented = not config.noop
    self.local_types = package.local_type_names()
    self.local_values = package.local_value_names()
    self.package_scope = package.top_level_names() | (reserved or set())
    self.exclusions: List[Exclusion] = []

  def assemble(self, source: SourceFile) -> Optional[SourceFile]:
    """
    Produces the proxy for one original file.

    Args:
        source (SourceFile): A parsed file of the package (not modified).

    Returns:
        Optional[SourceFile]: The proxy file, or None when no exported
        symbol of `source` survives (no artifact is written for it).
    """
    tracer = get_tracer()
    classifier = SymbolClassifier(
      file_name=source.name,
      local_types=self.local_types,
      instrumented=self.instrumented,
      reserved_params={HOOK_HELPER} if self.instrumented else set(),
      local_values=self.local_values,
    )
    verdicts = [v for v in (classifier.classify(d) for d in source.decls) if v is not SKIP]

    table = self.resolver.build_table(source) if self.instrumented else ImportTable()
    verdicts = [v for v in verdicts if self._imports_resolved(v, table, classifier)]
    self.exclusions.extend(classifier.exclusions)

    if not verdicts:
      tracer.log_file_skipped(source.name, "no exported symbols to proxy")
      return None

    org_ref = choose_alias(self.config.alias_prefix + self.package.name, self._taken_names(source, table, verdicts))

    rewriter = DeclarationRewriter(org_ref)
    synthesizer = FunctionProxySynthesizer(org_ref)
    body: List[GoNode] = []
    used: Set[str] = set()
    for verdict in verdicts:
      if isinstance(verdict, KeptValues):
        body.append(rewriter.rewrite_values(verdict))
      elif isinstance(verdict, KeptTypes):
        body.append(rewriter.rewrite_types(verdict))
      elif self.instrumented:
        used |= verdict.qualifiers
        body.append(synthesizer.synthesize(verdict.decl))
      else:
        body.append(synthesizer.bind_alias(verdict.decl))

    specs = self.resolver.emit(table, used)
    specs.append(ImportSpec(path=self.package.import_path, name=org_ref))
    tracer.log_import("emitted", self.package.import_path, org_ref)

    header = [generated_marker(self.config.tool_identity, self.package.import_path)]
    header.extend(copy.deepcopy(source.header))
    return SourceFile(
      name=source.name,
      package=self.package.name,
      header=header,
      decls=[ImportGroup(specs=specs), *body],
    )

  @staticmethod
  def _imports_resolved(verdict: Verdict, table: ImportTable, classifier: SymbolClassifier) -> bool:
    if not isinstance(verdict, KeptFunction) or not verdict.qualifiers:
      return True
    missing = sorted(q for q in verdict.qualifiers if q not in table)
    if not missing:
      return True
    classifier.exclude(verdict.decl.name, f"references unresolved import '{missing[0]}'")
    return False

  def _taken_names(self, source: SourceFile, table: ImportTable, verdicts: List[Verdict]) -> Set[str]:
    """Names the original-package alias must not shadow or be shadowed by."""
    taken = set(self.package_scope)
    taken |= table.aliases
    taken |= {s.name for s in source.imports if s.name}
    for verdict in verdicts:
      if isinstance(verdict, KeptFunction):
        fn = verdict.decl
        taken.update(n for n in fn.signature.param_names() if n)
        taken.update(n for r in fn.signature.results for n in r.names)
        taken.update(fn.type_param_names())
    return taken
