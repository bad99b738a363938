"""FastAPI web adapter for the CHIP-8 interpreter."""

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from typing import Optional

from chip8 import run_program, RunOptions
from chip8.cpu import ENTRY_ADDRESS
from chip8.memory import MEMORY_SIZE


# Constants
MAX_ROM_SIZE = MEMORY_SIZE - ENTRY_ADDRESS


# Request/Response models
class RunOptionsModel(BaseModel):
    seed: int = Field(default=0, ge=0)
    max_ticks: int = Field(default=10000, ge=1, le=1000000)
    keys_down: list[int] = Field(default_factory=list)
    halt_on_self_jump: bool = True
    trace: bool = False
    trace_include_registers: bool = False


class RunRequest(BaseModel):
    rom: str = Field(description="Program bytes as a hex string")
    options: Optional[RunOptionsModel] = None


class RunResponse(BaseModel):
    status: str
    ticks_executed: int
    final_state: dict
    display: list[str]
    tone: bool
    trace: list[dict]
    error: Optional[dict] = None


# Create FastAPI app
app = FastAPI(
    title="CHIP-8 Interpreter",
    description="Web API for running CHIP-8 programs headlessly with tracing",
    version="0.1.0",
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.post("/api/run", response_model=RunResponse)
async def run_rom(request: RunRequest):
    """Execute a CHIP-8 program.

    Args:
        request: Program bytes and execution options

    Returns:
        Execution result with final state, screen rows and trace
    """
    try:
        rom = bytes.fromhex(request.rom)
    except ValueError:
        raise HTTPException(status_code=400, detail="ROM must be a hex string")

    # Validate program size
    if len(rom) > MAX_ROM_SIZE:
        raise HTTPException(
            status_code=400,
            detail=f"ROM size exceeds limit of {MAX_ROM_SIZE} bytes",
        )

    opts = request.options or RunOptionsModel()
    run_opts = RunOptions(
        seed=opts.seed,
        max_ticks=opts.max_ticks,
        keys_down=opts.keys_down,
        halt_on_self_jump=opts.halt_on_self_jump,
        trace=opts.trace,
        trace_include_registers=opts.trace_include_registers,
    )

    result = run_program(rom, options=run_opts)
    return result.to_dict()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8080)
