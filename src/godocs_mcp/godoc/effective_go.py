"""
Curated Effective Go guidance, served without touching the network
"""

from .models import DocResult

EFFECTIVE_GO_URL = "https://go.dev/doc/effective_go"

# Callers key off these headers; keep the text stable.
EFFECTIVE_GO_CONTENT = """
# Effective Go - Best Practices

## Formatting
- Use `gofmt` - Go has a single, canonical style
- No tabs vs spaces debates - `gofmt` handles it

## Commentary
- Every exported name should have a doc comment
- Comments are complete sentences
- Begin with the name being declared: `// Printf formats...`

## Names
- Use MixedCaps or mixedCaps (not snake_case)
- Acronyms should be all caps: `HTTPServer`, `XMLParser`
- Short names are fine in limited scope: `i`, `n`, `err`

## Semicolons
- Lexer inserts semicolons automatically
- Opening brace must be on same line as control statement

## Control Structures
- No `do` or `while` - just `for`
- `if` can have init statement: `if err := doThing(); err != nil {}`
- `switch` doesn't need explicit `break`

## Functions
- Multiple return values: `func (f *File) Write(b []byte) (n int, err error)`
- Named return values document meaning
- `defer` for cleanup (LIFO order)

## Data
- `new(T)` allocates zeroed storage, returns `*T`
- `make(T, args)` for slices, maps, channels only
- Arrays are values; slices are references

## Initialization
- `init()` functions run after all variable declarations
- Multiple init functions per file allowed (run in order)

## Methods
- Pointer receivers can modify; value receivers cannot
- Consistency: if one method needs pointer receiver, all should use it

## Interfaces
- Implicit satisfaction - no `implements` keyword
- Accept interfaces, return concrete types
- Small interfaces: `io.Reader`, `io.Writer` are one method

## Errors
- Errors are values: `if err != nil`
- Custom error types implement `error` interface
- Wrap with context: `fmt.Errorf("failed to X: %w", err)`
- Use `errors.Is` and `errors.As` for checking

## Concurrency
- Don't communicate by sharing memory; share memory by communicating
- Goroutines are cheap - use them
- Channels for synchronization: `done := make(chan bool)`

## Context
- Use `context.Context` for cancellation and deadlines
- First parameter in functions: `func DoSomething(ctx context.Context, ...)`
- Don't store contexts in structs

## Testing
- Test files end with `_test.go`
- Test functions start with `Test`: `func TestMyFunction(t *testing.T)`
- Use `t.Run` for subtests
- Benchmarks start with `Benchmark`

## Documentation
- Package comments appear at top of any file
- Use `//` comments, not `/* */` for most cases
- Run `go doc` to view documentation
"""

EFFECTIVE_GO_TOPICS = (
    "Formatting",
    "Commentary",
    "Names",
    "Control Structures",
    "Functions",
    "Data",
    "Interfaces",
    "Errors",
    "Concurrency",
    "Context",
    "Testing",
)


def effective_go_result() -> DocResult:
    return DocResult(
        title="Effective Go",
        url=EFFECTIVE_GO_URL,
        synopsis="Tips for writing clear, idiomatic Go code",
        description=EFFECTIVE_GO_CONTENT,
        exported=list(EFFECTIVE_GO_TOPICS),
        note="Curated Effective Go best practices",
    )
