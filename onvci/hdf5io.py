#!/usr/bin/env python3
## vi: tabstop=4 shiftwidth=4 softtabstop=4 expandtab
## ---------------------------------------------------------------------
##
## Copyright (C) 2024 by the onvci authors
##
## This file is part of onvci.
##
## onvci is free software: you can redistribute it and/or modify
## it under the terms of the GNU General Public License as published
## by the Free Software Foundation, either version 3 of the License, or
## (at your option) any later version.
##
## onvci is distributed in the hope that it will be useful,
## but WITHOUT ANY WARRANTY; without even the implied warranty of
## MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
## GNU General Public License for more details.
##
## You should have received a copy of the GNU General Public License
## along with onvci. If not, see <http://www.gnu.org/licenses/>.
##
## ---------------------------------------------------------------------
import numpy as np

from os.path import basename

import h5py


def __emplace_ndarray(key, value, group, **kwargs):
    dset = group.create_dataset(key, data=value, **kwargs)
    dset.attrs["type"] = "ndarray"


def __extract_ndarray(dataset):
    arr = dataset[()]
    if dataset.dtype == h5py.special_dtype(vlen=str):
        # h5py 3 returns variable-length strings as raw bytes
        arr = np.array([v.decode() if isinstance(v, bytes) else v
                        for v in np.ravel(arr)], dtype=object)
        arr = arr.reshape(dataset.shape)
    return arr


def __emplace_list(key, value, group, **kwargs):
    dtype = None
    if value and all(isinstance(v, str) for v in value):
        dtype = h5py.special_dtype(vlen=str)
    dset = group.create_dataset(key, data=np.array(value, dtype=dtype),
                                **kwargs)
    dset.attrs["type"] = "list"


def __extract_list(dataset):
    return __extract_ndarray(dataset).tolist()


# Scalar types and their HDF5 representation
__scalar_transform = [
    (str,     h5py.special_dtype(vlen=str)),
    (bool,    np.dtype("b1")),
    (float,   np.dtype("f8")),
    (int,     np.dtype("int64")),
]


def __emplace_scalar(key, value, group, compression=None, **kwargs):
    # Compression is not supported for scalar datasets and dropped here
    for typ, dtype in __scalar_transform:
        if isinstance(value, typ):
            break
    else:
        raise TypeError(f"Error with key '{key}': Encountered unknown data "
                        f"type '{type(value)}'")
    dset = group.create_dataset(key, data=value, dtype=dtype, **kwargs)
    dset.attrs["type"] = "scalar"


def __extract_scalar(dataset):
    ret = dataset[()]
    if isinstance(ret, bytes):
        return ret.decode()
    for typ, dtype in __scalar_transform:
        if dataset.dtype == dtype:
            return typ(ret)
    return ret


def __extract_dataset(dataset):
    """Select the extractor based on the type attribute of the dataset"""
    typ = dataset.attrs.get("type", "scalar" if dataset.shape == () else "ndarray")
    return {
        "scalar":  __extract_scalar,
        "ndarray": __extract_ndarray,
        "list":    __extract_list,
    }[typ](dataset)


#
# High-level routines
#
def emplace_dict(dictionary, group, **kwargs):
    """
    Emplace a python dictionary "dictionary" into the HDF5 group "group"
    using the kwargs to create all neccessary datasets.
    """
    for key, value in dictionary.items():
        if isinstance(value, dict):
            emplace_dict(value, group.create_group(key), **kwargs)
        elif isinstance(value, np.ndarray):
            __emplace_ndarray(key, value, group, **kwargs)
        elif isinstance(value, (list, tuple)):
            __emplace_list(key, list(value), group, **kwargs)
        else:
            __emplace_scalar(key, value, group, **kwargs)


def extract_group(group):
    """Recursively extract an HDF5 group into a python dictionary"""
    ret = {}
    for value in group.values():
        if isinstance(value, h5py.Group):
            ret[basename(value.name)] = extract_group(value)
        elif isinstance(value, h5py.Dataset):
            ret[basename(value.name)] = __extract_dataset(value)
        else:
            raise ValueError("Encountered object in h5py which is neither "
                             "a Group nor a Dataset")
    return ret


def save(fname, dictionary):
    if not isinstance(dictionary, dict):
        raise TypeError("Second argument needs to be a dictionary")

    with h5py.File(fname, "w") as h5f:
        emplace_dict(dictionary, h5f, compression="gzip")


def load(fname):
    with h5py.File(fname, "r") as h5f:
        return extract_group(h5f)
